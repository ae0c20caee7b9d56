from __future__ import annotations


class InvalidAction(ValueError):
    """A submitted action broke turn order or betting rules. Table state is unchanged."""

    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


class ExhaustedDeck(RuntimeError):
    """More cards were requested than the deck holds. Not recoverable for the hand."""
