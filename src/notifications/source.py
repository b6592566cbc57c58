# webhook/url only at this point, every source gets the rendered text
# and raises a DeliverError subclass when it can't hand it over
class DeliverError(Exception):
    pass


class EncodeError(DeliverError):
    pass


class TransportError(DeliverError):
    pass


class UnexpectedStatus(DeliverError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"notification failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class NotificationSource():
    def send(self, text: str) -> None:
        raise NotImplementedError("Function implementation not found")
