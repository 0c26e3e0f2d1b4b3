class CollectibleServiceError(Exception):
    pass


class InvalidAmountError(CollectibleServiceError):
    pass


class SupplyExceededError(CollectibleServiceError):
    pass


class PaymentMismatchError(CollectibleServiceError):
    pass


class InsufficientSellerBalanceError(CollectibleServiceError):
    pass


class TransferFailedError(CollectibleServiceError):
    pass


class NoClaimableRewardsError(CollectibleServiceError):
    pass


class InvalidRangeError(CollectibleServiceError):
    pass


class UnauthorizedError(CollectibleServiceError):
    pass


class ReentrantCallError(CollectibleServiceError):
    pass


class RegistryInconsistencyError(CollectibleServiceError):
    pass
