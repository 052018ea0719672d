class MailDeliveryError(Exception):
    """Raised when an email could not be handed to the mail transport."""
