class BrokerConnectionError(Exception):
    pass

class SubscriptionError(Exception):
    def __init__(self, target: str, reason: str):
        self.target = target
        super().__init__(f"Could not start subscribe to {target}: {reason}")

class PublishError(Exception):
    pass
