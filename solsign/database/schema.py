from solsign.database.connection import get_connection
from solsign.logging.logger import Log

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS user_verifications (
        id BIGSERIAL PRIMARY KEY,
        username VARCHAR(50) UNIQUE NOT NULL,
        email VARCHAR(100) UNIQUE NOT NULL,
        phone_number VARCHAR(20),
        wallet_address VARCHAR(44) UNIQUE NOT NULL,
        consent_given BOOLEAN NOT NULL DEFAULT FALSE,
        phase VARCHAR(20) NOT NULL DEFAULT 'not_started',
        code CHAR(6),
        code_expires_at TIMESTAMPTZ,
        reward_granted BOOLEAN NOT NULL DEFAULT FALSE,
        reward_transaction_signature VARCHAR(128),
        reward_claimed_at TIMESTAMPTZ,
        rewarded_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_user_verifications_phase ON user_verifications (phase)",
    """
    CREATE TABLE IF NOT EXISTS liveness_checks (
        user_id VARCHAR(64) PRIMARY KEY,
        verified BOOLEAN NOT NULL,
        last_verified_at TIMESTAMPTZ NOT NULL,
        snapshot_hash VARCHAR(128)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS document_transactions (
        id BIGSERIAL PRIMARY KEY,
        tx_hash VARCHAR(128) UNIQUE NOT NULL,
        doc_hash VARCHAR(128) NOT NULL,
        signer_pubkey VARCHAR(44),
        proof_amount NUMERIC(20, 9),
        explorer_url TEXT,
        signed_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
)


def init_schema() -> None:
    """Create tables if they do not exist yet."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()
    Log.info(f"Database schema ensured ({len(SCHEMA_STATEMENTS)} statements)")
