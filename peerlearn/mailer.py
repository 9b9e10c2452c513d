import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema

from . import config

logger = structlog.get_logger(__name__)

conf = None
if config.MAIL_USERNAME and config.MAIL_PASSWORD and config.MAIL_FROM:
    conf = ConnectionConfig(
        MAIL_USERNAME=config.MAIL_USERNAME,
        MAIL_PASSWORD=config.MAIL_PASSWORD,
        MAIL_FROM=config.MAIL_FROM,
        MAIL_PORT=config.MAIL_PORT,
        MAIL_SERVER=config.MAIL_SERVER,
        MAIL_STARTTLS=config.MAIL_STARTTLS,
        MAIL_SSL_TLS=config.MAIL_SSL_TLS,
    )


def mail_configured() -> bool:
    return conf is not None


async def send_reset_token(email: str, token: str):
    message = MessageSchema(
        subject="PeerLearn - Password Reset",
        recipients=[email],
        body=(
            f"Use this token to reset your password: {token}\n"
            f"It expires in {config.RESET_TOKEN_EXPIRE_MINUTES} minutes."
        ),
        subtype="plain",
    )

    fm = FastMail(conf)
    await fm.send_message(message)
    logger.info("reset_token_mailed", email=email)
