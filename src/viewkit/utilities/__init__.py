from .logger import DEFAULT_FORMAT, configure_cli_logging, set_verbosity

__all__ = ["DEFAULT_FORMAT", "configure_cli_logging", "set_verbosity"]
