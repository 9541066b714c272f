class ActionPilotError(Exception):
    """Base exception for ActionPilot errors"""
    def __init__(self, msg: str):
        self.msg = msg

    def __str__(self):
        return self.msg


class InvalidRequestError(ActionPilotError):
    """Raised when an execution request is missing a required identifier"""
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Execution request field '{field_name}' is required")


class MetadataError(ActionPilotError):
    """Raised when a metadata document cannot be loaded"""
    pass


class PlanningError(ActionPilotError):
    """Base exception for errors raised while building a plan"""
    pass


class UnknownEntityTypeError(PlanningError):
    def __init__(self, entity_type_id: str):
        self.entity_type_id = entity_type_id
        super().__init__(f"EntityType not found: {entity_type_id}")


class UnknownActionError(PlanningError):
    def __init__(self, action_id: str):
        self.action_id = action_id
        super().__init__(f"Action not found: {action_id}")


class ActionNotApplicableError(PlanningError):
    """Raised when an action exists but does not apply to the requested entity type"""
    def __init__(self, action_id: str, entity_type_id: str):
        self.action_id = action_id
        self.entity_type_id = entity_type_id
        super().__init__(f"Action '{action_id}' is not applicable to entity type '{entity_type_id}'")


class MissingUIBindingError(PlanningError):
    def __init__(self, action_id: str):
        self.action_id = action_id
        super().__init__(f"UIBinding not found for action: {action_id}")


class ExecutionError(ActionPilotError):
    pass


class PlanNotFoundError(ExecutionError):
    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(f"Plan with id '{plan_id}' not found")


class ExecutorNotConfiguredError(ExecutionError):
    def __init__(self, msg: str | None = None):
        super().__init__(msg or "No plan executor configured")
