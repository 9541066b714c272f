import asyncio
import logging
import sys
from argparse import ArgumentParser

import yaml
from sqlalchemy.ext.asyncio import AsyncEngine

from actionpilot.agent import AgentClient, AgentStepRunner
from actionpilot.config import ActionPilotConfig, load_config
from actionpilot.exceptions import ActionPilotError
from actionpilot.executor import ExecutionResultRepository, MemoryExecutionResultRepository, PlanExecutor
from actionpilot.plan import ExecutionRequest, MemoryPlanRepository, PlanRepository
from actionpilot.planner import Planner
from actionpilot.resolver import MemoryResolver, Resolver
from actionpilot.service import ExecutionService
from actionpilot.storage.sql import (
    SqlExecutionResultRepository,
    SqlPlanRepository,
    SqlResolver,
    create_schema,
    create_session_factory,
)

logger = logging.getLogger(__name__)


def _parse_parameters(items: list[str] | None) -> dict[str, str]:
    parameters = {}
    for item in items or []:
        key, sep, value = item.partition('=')
        if not sep or not key:
            raise ValueError(f"Invalid parameter '{item}', expected key=value")
        parameters[key] = value
    return parameters


def _dump(data: dict):
    yaml.safe_dump(data, sys.stdout, default_flow_style=False, allow_unicode=True, sort_keys=False)


async def _build_storage(
        config: ActionPilotConfig,
) -> tuple[Resolver, PlanRepository, ExecutionResultRepository, AsyncEngine | None]:
    memory_resolver = MemoryResolver.from_file(config.metadata) if config.metadata else None
    if config.storage is None:
        return memory_resolver or MemoryResolver(), MemoryPlanRepository(), MemoryExecutionResultRepository(), None

    engine, session_factory = create_session_factory(config.storage.url, echo=config.storage.echo)
    if config.storage.create_schema:
        await create_schema(engine)
    resolver = SqlResolver(session_factory)
    if memory_resolver is not None:
        # Seed the store with the file's metadata.
        for entity_type in memory_resolver.entity_types():
            await resolver.register_entity_type(entity_type)
        for action in memory_resolver.actions():
            await resolver.register_action(action)
        for binding in memory_resolver.ui_bindings():
            await resolver.register_ui_binding(binding)
    return resolver, SqlPlanRepository(session_factory), SqlExecutionResultRepository(session_factory), engine


async def run(config_path: str, verbosity: int | None, request: ExecutionRequest, execute: bool) -> int:
    if not verbosity:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level)
    if level > logging.DEBUG:
        logging.getLogger('httpx').setLevel(logging.WARNING)

    config = load_config(config_path)
    logger.debug(f"Loaded config: {config}")
    resolver, repository, result_repository, engine = await _build_storage(config)
    try:
        service = ExecutionService(Planner(resolver), repository, result_repository=result_repository)
        plan = await service.create_plan(request)
        _dump({'plan': plan.to_dict()})
        if not execute:
            return 0
        if config.agent is None:
            logger.error("Cannot execute plan %s: no agent configured", plan.id)
            return 1

        async with AgentClient(config.agent.url, config.agent.timeout) as client:
            runner = AgentStepRunner(client, resolver, config.agent.app_base_url, config.agent.headless)
            service.executor = PlanExecutor(runner)
            try:
                result = await service.execute_plan(plan.id)
            finally:
                await runner.close()
        _dump({'result': result.to_dict()})
        return 0 if result.success else 2
    finally:
        if engine is not None:
            await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = ArgumentParser('actionpilot')
    parser.add_argument('--config', required=True, help="Path to the configuration file")
    parser.add_argument('-v', action='count', help="Verbosity level. -v for INFO, -vv for DEBUG")
    parser.add_argument('--param', action='append', metavar='KEY=VALUE', help="Request parameter, repeatable")
    parser.add_argument('--execute', action='store_true', help="Execute the plan through the configured agent")
    parser.add_argument('entity_type', help="Entity type id, e.g. Building")
    parser.add_argument('entity_id', help="Entity id")
    parser.add_argument('action', help="Action id")
    ns = parser.parse_args(argv)
    try:
        request = ExecutionRequest(ns.entity_type, ns.entity_id, ns.action, _parse_parameters(ns.param))
        return asyncio.run(run(ns.config, ns.v, request, ns.execute))
    except (ActionPilotError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
