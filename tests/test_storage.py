import pytest
import pytest_asyncio

from actionpilot.exceptions import MetadataError
from actionpilot.executor import NOT_EXECUTED_ERROR, PlanExecutor, StepOutcome
from actionpilot.metadata import Action, EntityType, SelectorKind, UIBinding
from actionpilot.plan import ExecutionRequest, Plan, PlanStatus, PlanStep
from actionpilot.planner import Planner
from actionpilot.storage.sql import (
    SqlExecutionResultRepository,
    SqlPlanRepository,
    SqlResolver,
    create_schema,
    create_session_factory,
)
from actionpilot.storage.sql.models import EntityTypeRow


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine, factory = create_session_factory(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await create_schema(engine)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def sql_resolver(session_factory, building_metadata):
    resolver = SqlResolver(session_factory)
    entity_type, action, binding = building_metadata
    await resolver.register_entity_type(entity_type)
    await resolver.register_action(action)
    await resolver.register_ui_binding(binding)
    return resolver


class TestSqlResolver:
    @pytest.mark.asyncio
    async def test_round_trip(self, sql_resolver):
        entity_type = await sql_resolver.find_entity_type('Building')
        assert entity_type.display_name == 'Building'

        action = await sql_resolver.find_action('order_egrn_extract')
        assert action.description == 'Orders an extract from the state real estate register'
        assert action.applicable_entity_type_ids == frozenset({'Building'})

        binding = await sql_resolver.find_ui_binding('order_egrn_extract')
        assert binding.selector == "[data-action='order_egrn_extract']"
        assert binding.selector_kind == SelectorKind.CSS

    @pytest.mark.asyncio
    async def test_unknown_ids(self, sql_resolver):
        assert await sql_resolver.find_entity_type('Car') is None
        assert await sql_resolver.find_action('sell') is None
        assert await sql_resolver.find_ui_binding('sell') is None

    @pytest.mark.asyncio
    async def test_register_replaces(self, sql_resolver):
        await sql_resolver.register_ui_binding(UIBinding(
            action_id='order_egrn_extract',
            selector='//button[@id="order"]',
            selector_kind=SelectorKind.XPATH,
            metadata={'page': 'card'},
        ))
        binding = await sql_resolver.find_ui_binding('order_egrn_extract')
        assert binding.selector_kind == SelectorKind.XPATH
        assert binding.metadata == {'page': 'card'}

    @pytest.mark.asyncio
    async def test_is_action_applicable(self, sql_resolver):
        await sql_resolver.register_entity_type(EntityType(id='Land', display_name='Land plot'))
        await sql_resolver.register_action(Action(id='survey', display_name='Survey',
                                                  applicable_entity_type_ids=frozenset({'Land'})))
        assert await sql_resolver.is_action_applicable('survey', 'Land')
        assert not await sql_resolver.is_action_applicable('order_egrn_extract', 'Land')

    @pytest.mark.asyncio
    async def test_planner_over_sql_store(self, sql_resolver):
        plan = await Planner(sql_resolver).create_plan(ExecutionRequest('Building', '93939', 'order_egrn_extract'))
        assert plan.steps[0].target == '/buildings/93939'
        assert len(plan.steps) == 5

    @pytest.mark.asyncio
    async def test_invalid_stored_page_url(self, session_factory):
        async with session_factory() as session, session.begin():
            session.add(EntityTypeRow(id='Person', name='Person', entity_meta={'page_url': '/people/{id}'}))
        with pytest.raises(MetadataError):
            await SqlResolver(session_factory).find_entity_type('Person')


class TestSqlPlanRepository:
    @pytest.mark.asyncio
    async def test_save_and_get(self, session_factory):
        repository = SqlPlanRepository(session_factory)
        plan = Plan('Building', '93939', 'order_egrn_extract', [
            PlanStep.open_page('/buildings/93939', 'Opening Building #93939'),
            PlanStep.explain('Orders an extract'),
            PlanStep.type_text('#comment', 'asap'),
            PlanStep.wait('result'),
        ])
        await repository.save(plan)

        stored = await repository.get(plan.id)
        assert stored == plan
        assert stored.steps[2].parameters == {'text': 'asap'}

    @pytest.mark.asyncio
    async def test_get_missing(self, session_factory):
        assert await SqlPlanRepository(session_factory).get('missing') is None

    @pytest.mark.asyncio
    async def test_save_updates_existing_plan(self, session_factory):
        repository = SqlPlanRepository(session_factory)
        plan = Plan('Building', '1', 'a', [PlanStep.explain('one'), PlanStep.explain('two')])
        await repository.save(plan)
        await repository.save(plan.with_status(PlanStatus.COMPLETED))

        stored = await repository.get(plan.id)
        assert stored.status == PlanStatus.COMPLETED
        assert [step.explanation for step in stored.steps] == ['one', 'two']
        assert len(await repository.list_plans()) == 1

    @pytest.mark.asyncio
    async def test_list_plans(self, session_factory):
        repository = SqlPlanRepository(session_factory)
        first = Plan('Building', '1', 'a')
        second = Plan('Building', '2', 'a', [PlanStep.screenshot()])
        await repository.save(first)
        await repository.save(second)

        plans = {plan.id: plan for plan in await repository.list_plans()}
        assert set(plans) == {first.id, second.id}
        assert plans[first.id].steps == ()
        assert plans[second.id].steps == second.steps


class PartialRunner:
    """Reports a screenshot for the first step and nothing for the rest."""

    async def run_plan(self, steps, plan_id=None):
        return [StepOutcome.succeeded('shot', duration_ms=25, artifact_ref='/tmp/shot.png',
                                      step_type='screenshot', step_target=None)]


class TestSqlExecutionResultRepository:
    @pytest.mark.asyncio
    async def test_save_and_find(self, session_factory):
        plan = Plan('Building', '93939', 'order_egrn_extract', [
            PlanStep.screenshot('Capture'),
            PlanStep.type_text('#comment', 'asap'),
            PlanStep.wait('result'),
        ])
        result = await PlanExecutor(PartialRunner()).execute(plan)
        repository = SqlExecutionResultRepository(session_factory)
        await repository.save(result)

        stored = await repository.find_by_plan_id(plan.id)
        assert stored.plan_id == plan.id
        assert stored.success is False
        assert stored.started_at == result.started_at
        assert stored.finished_at == result.finished_at
        assert [entry.step_index for entry in stored.log_entries] == [0, 1, 2]
        assert [entry.step for entry in stored.log_entries] == list(plan.steps)
        assert stored.log_entries[0].outcome.artifact_ref == '/tmp/shot.png'
        assert stored.log_entries[0].outcome.duration_ms == 25
        assert stored.log_entries[0].outcome.executed_at == result.log_entries[0].outcome.executed_at
        assert [entry.outcome.error for entry in stored.log_entries[1:]] == [NOT_EXECUTED_ERROR] * 2
        assert stored.log_entries[2].outcome.step_type == 'wait'
        assert stored.log_entries[2].outcome.step_target == 'result'

    @pytest.mark.asyncio
    async def test_find_missing(self, session_factory):
        assert await SqlExecutionResultRepository(session_factory).find_by_plan_id('missing') is None

    @pytest.mark.asyncio
    async def test_later_result_replaces_earlier(self, session_factory):
        plan = Plan('Building', '1', 'a', [PlanStep.screenshot(), PlanStep.wait('result')])
        repository = SqlExecutionResultRepository(session_factory)
        await repository.save(await PlanExecutor(PartialRunner()).execute(plan))

        complete = Plan('Building', '1', 'a', [PlanStep.screenshot()], id=plan.id)
        await repository.save(await PlanExecutor(PartialRunner()).execute(complete))

        stored = await repository.find_by_plan_id(plan.id)
        assert stored.success
        assert len(stored.log_entries) == 1
