from .logging_utils import log_preprocess_action, setup_universal_logging

__all__ = ["log_preprocess_action", "setup_universal_logging"]
