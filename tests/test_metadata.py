import pytest
from pydantic import ValidationError

from actionpilot.metadata import Action, EntityType, SelectorKind, UIBinding


class TestEntityType:
    def test_identity_is_id(self):
        a = EntityType(id='Building', display_name='Building', metadata={'floors': 3})
        b = EntityType(id='Building', display_name='House')
        assert a == b
        assert hash(a) == hash(b)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            EntityType(id='', display_name='Building')

    def test_is_frozen(self):
        entity_type = EntityType(id='Building', display_name='Building')
        with pytest.raises(ValidationError):
            entity_type.display_name = 'Other'


class TestAction:
    def test_is_applicable_to(self):
        action = Action(id='a', display_name='A', applicable_entity_type_ids=frozenset({'Building', 'Land'}))
        assert action.is_applicable_to('Building')
        assert action.is_applicable_to('Land')
        assert not action.is_applicable_to('Car')

    def test_no_applicable_types_by_default(self):
        action = Action(id='a', display_name='A')
        assert action.applicable_entity_type_ids == frozenset()
        assert not action.is_applicable_to('Building')
        assert action.description is None

    def test_accepts_list_of_types(self):
        action = Action.model_validate({'id': 'a', 'display_name': 'A', 'applicable_entity_type_ids': ['Building']})
        assert action.is_applicable_to('Building')


class TestUIBinding:
    def test_defaults_to_css(self):
        binding = UIBinding(action_id='a', selector='#btn')
        assert binding.selector_kind == SelectorKind.CSS

    def test_selector_kind_from_string(self):
        binding = UIBinding.model_validate({'action_id': 'a', 'selector': '//button', 'selector_kind': 'XPATH'})
        assert binding.selector_kind == SelectorKind.XPATH

    def test_empty_selector_rejected(self):
        with pytest.raises(ValidationError):
            UIBinding(action_id='a', selector='')

    def test_identity_is_action_id(self):
        assert UIBinding(action_id='a', selector='#x') == UIBinding(action_id='a', selector='#y')


class TestReadOnlyMetadata:
    @pytest.mark.parametrize('value', [
        EntityType(id='Building', display_name='Building', metadata={'page_url': '/b/{entity_id}'}),
        Action(id='a', display_name='A', metadata={'group': 'orders'}),
        UIBinding(action_id='a', selector='#x', metadata={'page': 'card'}),
    ])
    def test_metadata_cannot_be_changed(self, value):
        with pytest.raises(TypeError):
            value.metadata['page_url'] = '/y/{entity_id}'

    def test_default_metadata_is_read_only(self):
        with pytest.raises(TypeError):
            EntityType(id='Building', display_name='Building').metadata['page_url'] = '/y'

    def test_input_dict_is_copied(self):
        source = {'floors': 3}
        entity_type = EntityType(id='Building', display_name='Building', metadata=source)
        source['floors'] = 4
        assert entity_type.metadata == {'floors': 3}

    def test_page_url_must_be_string(self):
        with pytest.raises(ValidationError):
            EntityType(id='Building', display_name='Building', metadata={'page_url': 42})
