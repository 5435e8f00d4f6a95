from typing import Protocol


class Repository(Protocol):
    def head(self) -> str: ...

    def current_ref(self) -> str: ...

    def diff(self, old: str, new: str) -> str: ...

    def checkout(self, revision: str) -> None: ...
