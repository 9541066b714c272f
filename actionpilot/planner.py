"""Planner: turns a validated execution request into a linear plan.

Plans are a single fixed template in this version:

1. ``open_page``  open the entity page
2. ``explain``    explain the action to the user
3. ``hover``      hover over the action element
4. ``click``      trigger the action
5. ``wait``       wait for the result

Hover and click reference the action symbolically (``action(<id>)``); the
step runner resolves that to a concrete selector through the UI binding, so
the same plan can be replayed against different bindings.
"""

import logging

from actionpilot.exceptions import (
    ActionNotApplicableError,
    MissingUIBindingError,
    UnknownActionError,
    UnknownEntityTypeError,
)
from actionpilot.metadata import PAGE_URL_METADATA_KEY, Action, EntityType, format_page_url
from actionpilot.plan import ExecutionRequest, Plan, PlanStep
from actionpilot.resolver import Resolver

logger = logging.getLogger(__name__)

RESULT_CONDITION = 'result'


def build_entity_page_url(entity_type: EntityType, entity_id: str) -> str:
    """Page URL of an entity.

    Uses the entity type's ``page_url`` metadata template when present,
    otherwise ``/<lower-cased entity type id>s/<entity id>``. A template that
    cannot be rendered falls back to the default path.
    """
    template = entity_type.metadata.get(PAGE_URL_METADATA_KEY)
    if isinstance(template, str) and template:
        try:
            return format_page_url(template, entity_type.id, entity_id)
        except ValueError as e:
            logger.warning("Ignoring page_url of entity type %s: %s", entity_type.id, e)
    return f'/{entity_type.id.lower()}s/{entity_id}'


class Planner:
    def __init__(self, resolver: Resolver):
        self.resolver = resolver

    async def create_plan(self, request: ExecutionRequest) -> Plan:
        """Validate the request against metadata and build its plan.

        Raises:
            UnknownEntityTypeError: The entity type is not known.
            UnknownActionError: The action is not known.
            ActionNotApplicableError: The action does not apply to the entity type.
            MissingUIBindingError: The action has no UI binding.
        """
        entity_type = await self.resolver.find_entity_type(request.entity_type_id)
        if entity_type is None:
            raise UnknownEntityTypeError(request.entity_type_id)

        action = await self.resolver.find_action(request.action_id)
        if action is None:
            raise UnknownActionError(request.action_id)

        if not action.is_applicable_to(entity_type.id):
            raise ActionNotApplicableError(action.id, entity_type.id)

        if await self.resolver.find_ui_binding(action.id) is None:
            raise MissingUIBindingError(action.id)

        steps = self._build_linear_plan(entity_type, action, request.entity_id)
        plan = Plan(entity_type.id, request.entity_id, action.id, steps)
        logger.info("Created plan %s for %s #%s action=%s with %d steps",
                    plan.id, entity_type.id, request.entity_id, action.id, len(steps))
        return plan

    @staticmethod
    def _build_linear_plan(entity_type: EntityType, action: Action, entity_id: str) -> list[PlanStep]:
        page_url = build_entity_page_url(entity_type, entity_id)
        explanation = action.description or f"Performing: {action.display_name}"
        return [
            PlanStep.open_page(page_url, f"Opening {entity_type.display_name} #{entity_id}"),
            PlanStep.explain(explanation),
            PlanStep.hover(action.id, f"Hovering over the '{action.display_name}' action element"),
            PlanStep.click(action.id, f"Performing action '{action.display_name}'"),
            PlanStep.wait(RESULT_CONDITION, f"Waiting for action '{action.display_name}' to complete"),
        ]
