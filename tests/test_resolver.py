import threading

import pytest

from actionpilot.exceptions import MetadataError
from actionpilot.metadata import Action, EntityType, SelectorKind, UIBinding
from actionpilot.resolver import MemoryResolver


class TestMemoryResolver:
    @pytest.mark.asyncio
    async def test_lookups(self, building_resolver):
        assert (await building_resolver.find_entity_type('Building')).display_name == 'Building'
        assert (await building_resolver.find_action('order_egrn_extract')).id == 'order_egrn_extract'
        binding = await building_resolver.find_ui_binding('order_egrn_extract')
        assert binding.selector_kind == SelectorKind.CSS

    @pytest.mark.asyncio
    async def test_unknown_ids_return_none(self, building_resolver):
        assert await building_resolver.find_entity_type('Car') is None
        assert await building_resolver.find_action('sell') is None
        assert await building_resolver.find_ui_binding('sell') is None

    @pytest.mark.asyncio
    async def test_is_action_applicable(self, building_resolver):
        assert await building_resolver.is_action_applicable('order_egrn_extract', 'Building')
        assert not await building_resolver.is_action_applicable('order_egrn_extract', 'Land')
        assert not await building_resolver.is_action_applicable('unknown', 'Building')

    @pytest.mark.asyncio
    async def test_registration_is_visible_immediately(self):
        resolver = MemoryResolver()
        assert await resolver.find_entity_type('Land') is None
        resolver.register_entity_type(EntityType(id='Land', display_name='Land plot'))
        assert (await resolver.find_entity_type('Land')).display_name == 'Land plot'

    @pytest.mark.asyncio
    async def test_last_registration_wins(self):
        resolver = MemoryResolver()
        resolver.register_ui_binding(UIBinding(action_id='a', selector='#old'))
        resolver.register_ui_binding(UIBinding(action_id='a', selector='#new'))
        assert (await resolver.find_ui_binding('a')).selector == '#new'
        assert len(resolver.ui_bindings()) == 1

    @pytest.mark.asyncio
    async def test_concurrent_registrations_keep_all_keys(self):
        resolver = MemoryResolver()

        def register(start: int):
            for i in range(start, start + 200):
                resolver.register_action(Action(id=f'action_{i}', display_name=f'Action {i}'))

        threads = [threading.Thread(target=register, args=(n * 200,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(resolver.actions()) == 1600
        for i in (0, 799, 1599):
            assert (await resolver.find_action(f'action_{i}')).display_name == f'Action {i}'


class TestMemoryResolverLoading:
    @pytest.mark.asyncio
    async def test_from_dict(self):
        resolver = MemoryResolver.from_dict({
            'entity_types': [{'id': 'Building', 'display_name': 'Building'}],
            'actions': [{
                'id': 'order_egrn_extract',
                'display_name': 'Order EGRN extract',
                'applicable_entity_type_ids': ['Building'],
            }],
            'ui_bindings': [{'action_id': 'order_egrn_extract', 'selector': '#order', 'selector_kind': 'CSS'}],
        })
        assert await resolver.is_action_applicable('order_egrn_extract', 'Building')
        assert (await resolver.find_ui_binding('order_egrn_extract')).selector == '#order'

    def test_from_dict_rejects_invalid_items(self):
        with pytest.raises(MetadataError):
            MemoryResolver.from_dict({'entity_types': [{'id': 'Building'}]})

    def test_from_dict_rejects_unknown_sections(self):
        with pytest.raises(MetadataError):
            MemoryResolver.from_dict({'states': []})

    @pytest.mark.asyncio
    async def test_from_file(self, tmp_path):
        path = tmp_path / 'metadata.yml'
        path.write_text(
            "entity_types:\n"
            "  - id: Building\n"
            "    display_name: Building\n"
            "actions: []\n",
            encoding='utf-8',
        )
        resolver = MemoryResolver.from_file(str(path))
        assert await resolver.find_entity_type('Building') is not None
        assert resolver.actions() == []

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(MetadataError):
            MemoryResolver.from_file(str(tmp_path / 'missing.yml'))

    def test_from_file_with_list_document(self, tmp_path):
        path = tmp_path / 'metadata.yml'
        path.write_text("- Building\n", encoding='utf-8')
        with pytest.raises(MetadataError):
            MemoryResolver.from_file(str(path))

    def test_from_dict_rejects_invalid_page_url(self):
        with pytest.raises(MetadataError):
            MemoryResolver.from_dict({'entity_types': [
                {'id': 'Person', 'display_name': 'Person', 'metadata': {'page_url': '/people/{id}'}},
            ]})
