"""
Command Line Interface for podtmpl.
"""
import click
from ..MODELS.run_config import DEFAULT_BASE, DEFAULT_TEMPLATE, Mode, PodConfig
from ..MANAGERS.pod_lifecycle import PodLifecycle
from ..errors import PodTemplateError

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])
MODES = ', '.join(mode.value for mode in Mode)


class PassthroughCommand(click.Command):
    """
    Command that hands everything after ``--`` to the runtime untouched.

    Other positional arguments are rejected as unexpected.
    """
    def parse_args(self, ctx, args):
        if '--' in args:
            idx = args.index('--')
            args, ctx.meta['extra_args'] = args[:idx], tuple(args[idx + 1:])
        else:
            ctx.meta['extra_args'] = ()
        return super().parse_args(ctx, args)


def pod_options(func):
    """
    Options shared by every mode.
    """
    options = [
        click.option('--template', '-t', 'template_path', default=DEFAULT_TEMPLATE, show_default=True,
                     help='pod-template to use'),
        click.option('--base', '-b', 'base_path', default=DEFAULT_BASE, show_default=True,
                     help='basepath to prepend all relative volume paths'),
        click.option('--name', '-n', default='', help='name of the pod'),
        click.option('--out', '-o', default=None, help='pod manifest to write [default: stdout]'),
        click.option('--slice', '-s', 'slice_', default='', help='slice of the pod'),
        click.option('--env-file', '-e', 'env_files', multiple=True,
                     help='.env file for template variables (repeatable)'),
        click.option('--interpolate', is_flag=True, default=False,
                     help='substitute ${VAR} references in the template (implied by --env-file)'),
        click.option('--sudo/--no-sudo', default=True, show_default=True,
                     help='run rkt and systemd commands through sudo'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def execute(mode: Mode, template_path, base_path, name, out, slice_, env_files, interpolate, sudo):
    """
    Builds the configuration and runs the mode, turning failures into an exit status.
    """
    config = PodConfig(
        template_path=template_path,
        base_path=base_path,
        name=name,
        slice=slice_,
        out=out,
        extra_args=click.get_current_context().meta['extra_args'],
        env_files=tuple(env_files),
        interpolate=interpolate,
        sudo=sudo,
    )
    if mode.needs_name and not config.name:
        raise click.UsageError("you must specify --name when working with pods in background")

    try:
        PodLifecycle(config).dispatch(mode)
    except PodTemplateError as e:
        click.echo(f"Error: {e}", err=True)
        click.get_current_context().exit(e.exit_code)


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """
    podtmpl - compile pod templates into rkt pod manifests and run them.

    Arguments after `--` are passed unmodified to rkt (run, start) or
    journalctl (logs).
    """
    if ctx.invoked_subcommand is None:
        raise click.UsageError(f"specify one of {MODES}", ctx=ctx)


@cli.command(cls=PassthroughCommand)
@pod_options
def compile(**kwargs):
    """Write the pod manifest without running it."""
    execute(Mode.COMPILE, **kwargs)


@cli.command(cls=PassthroughCommand)
@pod_options
def run(**kwargs):
    """Run the pod in the foreground."""
    execute(Mode.RUN, **kwargs)


@cli.command(cls=PassthroughCommand)
@pod_options
def start(**kwargs):
    """Start the pod as a transient systemd unit."""
    execute(Mode.START, **kwargs)


@cli.command(cls=PassthroughCommand)
@pod_options
def stop(**kwargs):
    """Stop the pod's unit and reset its failed state."""
    execute(Mode.STOP, **kwargs)


@cli.command(cls=PassthroughCommand)
@pod_options
def status(**kwargs):
    """Show the systemd status of the pod's unit."""
    execute(Mode.STATUS, **kwargs)


@cli.command(cls=PassthroughCommand)
@pod_options
def logs(**kwargs):
    """Show the journal of the running pod."""
    execute(Mode.LOGS, **kwargs)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
