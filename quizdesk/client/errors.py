from __future__ import annotations


class TransportError(Exception):
    pass


class UnexpectedResponseError(Exception):
    def __init__(self, status_code: int, payload: object = None) -> None:
        super().__init__(status_code, payload)
        self.status_code = status_code
        self.payload = payload
