class SellerProError(Exception):
    code = "error"


class NotFoundError(SellerProError):
    code = "not_found"


class InactiveRewardError(SellerProError):
    code = "inactive"


class InsufficientBalanceError(SellerProError):
    code = "insufficient_balance"


class AlreadyInvitedError(SellerProError):
    code = "already_invited"


class AlreadyProcessedError(SellerProError):
    code = "already_processed"


class InvalidTransitionError(SellerProError):
    code = "invalid_transition"


class MissingFieldError(SellerProError):
    code = "missing_field"

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Missing fields: {', '.join(fields)}")


class SchemaVersionError(SellerProError):
    code = "schema_version"


class InvalidAmountError(SellerProError):
    code = "invalid_amount"
