"""Verification emails sent during the profile flow."""

from email.message import EmailMessage

_CODE_TEXT = """Hello {username}!

Please verify your email address to complete your SolSign profile verification.

Your verification code is: {code}
This code expires in {ttl_minutes} minutes.

Complete your email verification to receive {reward_amount:g} {symbol} tokens as a welcome reward!

If you didn't request this verification, please ignore this email.
"""

_CODE_HTML = """<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #6366f1;">SolSign</h1>
  <p>Hello {username}!<br>Please verify your email address to complete your SolSign profile verification.</p>
  <p>Your verification code is:</p>
  <div style="font-size: 32px; font-weight: bold; letter-spacing: 5px;">{code}</div>
  <p style="font-size: 12px;">This code expires in {ttl_minutes} minutes</p>
  <p>Complete your email verification to receive <strong>{reward_amount:g} {symbol} tokens</strong> as a welcome reward!</p>
  <p style="font-size: 12px;">If you didn't request this verification, please ignore this email.</p>
</div>
"""

_SUCCESS_TEXT = """Congratulations {username}!

Your email has been successfully verified.
{reward_amount:g} {symbol} tokens have been sent to your connected wallet.

Transaction: {explorer_url}
View your wallet: {client_url}/wallet
"""

_SUCCESS_HTML = """<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #6366f1;">SolSign</h1>
  <h2>Verification Complete!</h2>
  <p>Congratulations {username}!<br>Your email has been successfully verified.</p>
  <div style="font-size: 28px; font-weight: bold;">{reward_amount:g} {symbol} Tokens</div>
  <p>Your tokens have been sent to your connected wallet!</p>
  <p><a href="{explorer_url}">View transaction</a> &middot; <a href="{client_url}/wallet">View your wallet</a></p>
</div>
"""


def _build(sender: str, recipient: str, subject: str, text: str, html: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = subject
    message.set_content(text)
    message.add_alternative(html, subtype="html")
    return message


def verification_code_message(
    *,
    sender: str,
    recipient: str,
    username: str,
    code: str,
    ttl_minutes: int,
    reward_amount: float,
    symbol: str,
) -> EmailMessage:
    values = {
        "username": username,
        "code": code,
        "ttl_minutes": ttl_minutes,
        "reward_amount": reward_amount,
        "symbol": symbol,
    }
    return _build(
        sender,
        recipient,
        "SolSign Email Verification - Your Verification Code",
        _CODE_TEXT.format(**values),
        _CODE_HTML.format(**values),
    )


def verification_success_message(
    *,
    sender: str,
    recipient: str,
    username: str,
    reward_amount: float,
    symbol: str,
    explorer_url: str,
    client_url: str,
) -> EmailMessage:
    values = {
        "username": username,
        "reward_amount": reward_amount,
        "symbol": symbol,
        "explorer_url": explorer_url,
        "client_url": client_url,
    }
    return _build(
        sender,
        recipient,
        "SolSign Verification Complete - Welcome to the Platform!",
        _SUCCESS_TEXT.format(**values),
        _SUCCESS_HTML.format(**values),
    )
