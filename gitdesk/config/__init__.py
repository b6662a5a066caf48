from gitdesk.config.settings import AiConfig, Settings

__all__ = ["AiConfig", "Settings"]
