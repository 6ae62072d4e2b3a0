"""Exception hierarchy for configuration, load balancer, deployment and cancellation failures."""


class FleetrollError(Exception):
    """Base class for every error raised by fleetroll."""


class ConfigurationError(FleetrollError):
    """Invalid fleet/plan configuration. Raised before anything executes."""


class LoadBalancerError(FleetrollError):
    """A call to the external load balancer failed."""


class DeploymentError(FleetrollError):
    """An operation failed while deploying."""

    def __init__(self, message, operation=None, server=None):
        super().__init__(message)
        self.operation = operation
        self.server = server


class RunCancelledError(FleetrollError):
    """The run was cancelled at a check point. Not a deployment failure."""
