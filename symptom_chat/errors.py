# symptom_chat/errors.py


class SymptomChatError(Exception):
    """Root of the errors this service raises on purpose."""


class ConfigError(SymptomChatError):
    """An environment setting could not be parsed."""


class PersistenceError(SymptomChatError):
    """The session table could not be read or written.

    SessionStore turns this into a PersistResult; it never reaches a route.
    """
