# canteen/domain/errors.py


class CanteenError(Exception):
    """Bazowy blad domeny kantyny."""


class NotFound(CanteenError):
    """Brak encji albo encja nalezy do innego uzytkownika."""


class InvalidInput(CanteenError):
    pass


class EmptyCart(CanteenError):
    pass


class InvalidStatus(CanteenError):
    pass


class OrderCreationFailed(CanteenError):
    """Checkout nie powiodl sie - transakcja wycofana, koszyk nietkniety."""


class InternalError(CanteenError):
    pass


class Unauthorized(CanteenError):
    pass


class Forbidden(CanteenError):
    pass
