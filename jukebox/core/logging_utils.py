import logging

# Global project logger (can be tuned via logging_config)
logger = logging.getLogger("party_jukebox")


def log_section(title: str) -> None:
    """
    Log a top-level section header.
    """
    logger.info("=== %s ===", title)


def log_info(message: str) -> None:
    """
    Neutral information message.
    """
    logger.info("%s", message)


def log_step(message: str) -> None:
    """
    Action step / ongoing work.
    """
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    """
    Warning / non-fatal problem (best-effort paths end up here).
    """
    logger.warning("⚠️ %s", message)


def log_error(message: str) -> None:
    logger.error("❌ %s", message)


class _TaggedAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"[{self.extra['tag']}] {msg}", kwargs


def tagged_logger(tag: str) -> logging.LoggerAdapter:
    """
    Project logger that prefixes every line with `[tag]`, e.g. a request id,
    so the lines of one multi-step request can be grepped together.
    """
    return _TaggedAdapter(logger, {"tag": tag})
