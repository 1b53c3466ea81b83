"""Translation of user-facing messages."""

from workflow_fsm.i18n.translator import DEFAULT_MESSAGES, Translator, create_translator

__all__ = ["DEFAULT_MESSAGES", "Translator", "create_translator"]
