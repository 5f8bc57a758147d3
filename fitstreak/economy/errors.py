class GamificationError(Exception):
    code = "E_GAMIFICATION"


class InvalidArgumentError(GamificationError):
    code = "E_INVALID_ARGUMENT"


class NotFoundError(GamificationError):
    code = "E_NOT_FOUND"


class FailedPreconditionError(GamificationError):
    code = "E_FAILED_PRECONDITION"


class InternalError(GamificationError):
    code = "E_INTERNAL"


class InvalidQuantityError(InvalidArgumentError):
    code = "E_INVALID_QUANTITY"


class InvalidActivityTypeError(InvalidArgumentError):
    code = "E_INVALID_ACTIVITY_TYPE"


class InvalidDateRangeError(InvalidArgumentError):
    code = "E_INVALID_DATE_RANGE"


class UserNotFoundError(NotFoundError):
    code = "E_USER_NOT_FOUND"


class ShopItemNotFoundError(NotFoundError):
    code = "E_ITEM_NOT_FOUND"


class ShopItemDisabledError(FailedPreconditionError):
    code = "E_ITEM_DISABLED"


class InsufficientGemsError(FailedPreconditionError):
    code = "E_INSUFFICIENT_GEMS"


class RepairItemMissingError(FailedPreconditionError):
    code = "E_REPAIR_ITEM_MISSING"


class NothingToRepairError(FailedPreconditionError):
    code = "E_NOTHING_TO_REPAIR"


class RepairWindowExpiredError(FailedPreconditionError):
    code = "E_REPAIR_WINDOW_EXPIRED"


class TransactionConflictError(InternalError):
    code = "E_TRANSACTION_CONFLICT"
