"""CLI entry point for llmhub."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from llmhub import __version__
from llmhub.l1_entities.mode import Mode


def _list_models() -> None:
    from llmhub.l1_entities.model_catalog import MODELS  # noqa: PLC0415 -- deferred: pydantic not loaded on --help

    for model in MODELS:
        versions = ', '.join(f'{v}*' if v == model.default_version else v for v in model.versions)
        click.echo(f'{model.name:<12} [{versions}]  {model.description}')


@click.command()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True),
    help='Path to YAML config file.',
)
@click.option('-m', '--model', 'model_name', default=None, help="Model name from the catalog (e.g. 'Llama-3').")
@click.option('-t', '--version-tag', default=None, help="Model version (e.g. '8b'); defaults to the catalog default.")
@click.option(
    '--mode',
    type=click.Choice([m.value for m in Mode]),
    default=None,
    help='Conversation mode applied to the system prompt.',
)
@click.option('--no-suggestions', is_flag=True, default=False, help='Disable prompt suggestions.')
@click.option('--list-models', is_flag=True, default=False, help='List catalog models and exit.')
@click.option(
    '--log-dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory for the debug log file.',
)
@click.version_option(version=__version__)
def cli(config_path, model_name, version_tag, mode, no_suggestions, list_models, log_dir):
    """llmhub -- chat with locally hosted Ollama models, streaming replies as they arrive."""
    if list_models:
        _list_models()
        return

    from llmhub.l1_entities.errors import UnknownModelError  # noqa: PLC0415 -- deferred: not needed for --help
    from llmhub.l3_interface_adapters.gateways.paths import LOG_DIR  # noqa: PLC0415 -- deferred: not needed for --help
    from llmhub.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from llmhub.l4_frameworks_and_drivers.config import (  # noqa: PLC0415 -- deferred: not needed for --help
        InfraConfig,
        build_app_config,
    )

    overrides: dict = {}
    if model_name:
        overrides['model'] = {'name': model_name, 'version': version_tag or ''}
    elif version_tag:
        overrides['model'] = {'version': version_tag}
    if mode:
        overrides['mode'] = mode
    if no_suggestions:
        overrides['suggestions'] = {'enabled': False}

    try:
        raw = YamlConfigLoader().load(config_path, overrides=overrides)
        config = build_app_config(raw)
        infra = InfraConfig.model_validate(raw)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    from llmhub.l4_frameworks_and_drivers.console_runner import (  # noqa: PLC0415 -- deferred: only for interactive sessions
        ConsolePresenter,
        run_console_chat,
    )
    from llmhub.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: only for interactive sessions
        DependencyContainer,
    )
    from llmhub.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: only for interactive sessions
        setup_file_logging,
    )

    try:
        container = DependencyContainer(config, infra=infra, presenter=ConsolePresenter())
    except UnknownModelError as e:
        click.echo(f'Error: {e}. Use --list-models to see available models.', err=True)
        sys.exit(1)

    setup_file_logging(Path(log_dir) if log_dir else LOG_DIR)
    _preflight_ollama(container.llm_client, container.model_tag)

    click.echo(f'Chatting with {container.model.name} ({container.model_tag}). Ctrl-C stops a reply, /quit exits.')
    asyncio.run(run_console_chat(container.controller))


def _preflight_ollama(client, model_tag: str) -> bool:
    ok, err = client.check_connectivity()
    if not ok:
        click.echo(f'Warning: Ollama not reachable ({err}). Requests will fail.', err=True)
        return False
    if client.check_models([model_tag]):
        click.echo(f"Warning: model '{model_tag}' not found locally. Run: ollama pull {model_tag}", err=True)
        return False
    return True
