"""
Опциональная интеграция Sentry для error tracking
"""

import logging

from puntodeagua.core.config import Config


logger = logging.getLogger(__name__)


def init_sentry() -> str | None:
    """
    Инициализация Sentry для error tracking (опционально)

    Returns:
        Sentry DSN если успешно, None если Sentry не настроен
    """
    sentry_dsn = Config.SENTRY_DSN
    environment = Config.ENVIRONMENT

    if not sentry_dsn:
        logger.info("Sentry DSN не настроен, error tracking отключен")
        return None

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        logger.warning(
            "Sentry SDK не установлен. Установите: pip install -e .[monitoring]"
        )
        return None

    logging_integration = LoggingIntegration(
        level=logging.INFO,  # breadcrumbs
        event_level=logging.ERROR,  # события
    )

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=environment,
        traces_sample_rate=0.1,
        integrations=[logging_integration],
        send_default_pii=False,  # Email, телефоны и адреса клиентов не отправляем
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )

    logger.info("Sentry инициализирован (environment: %s)", environment)
    return sentry_dsn
