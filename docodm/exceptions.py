class DocodmError(Exception):
    pass


class ParseError(DocodmError):
    pass


class UnsupportedValueError(DocodmError, TypeError):
    pass


class InvalidExpiryError(DocodmError, ValueError):
    pass


class SessionNotInitializedError(DocodmError):
    pass


class DocumentNotFoundError(DocodmError):
    pass


class TransactionContextMismatchError(DocodmError):
    pass


class OperationNotAllowedInTransactionError(DocodmError):
    pass


class DocumentExistsError(DocodmError):
    pass


class ConcurrentModificationError(DocodmError):
    pass
