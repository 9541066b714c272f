import pytest

from actionpilot.metadata import Action, EntityType, SelectorKind, UIBinding
from actionpilot.resolver import MemoryResolver


@pytest.fixture
def building_metadata() -> tuple[EntityType, Action, UIBinding]:
    entity_type = EntityType(id='Building', display_name='Building')
    action = Action(
        id='order_egrn_extract',
        display_name='Order EGRN extract',
        description='Orders an extract from the state real estate register',
        applicable_entity_type_ids=frozenset({'Building'}),
    )
    binding = UIBinding(
        action_id='order_egrn_extract',
        selector="[data-action='order_egrn_extract']",
        selector_kind=SelectorKind.CSS,
    )
    return entity_type, action, binding


@pytest.fixture
def building_resolver(building_metadata) -> MemoryResolver:
    entity_type, action, binding = building_metadata
    return MemoryResolver([entity_type], [action], [binding])
