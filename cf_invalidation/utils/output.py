"""Output formatting for the cf-invalidation CLI"""

import json
from typing import Any, Dict, Iterable, Optional

import click
import yaml

from cf_invalidation.models import Invalidation

# Columns of the `list` table; json/yaml output also carries the message
INVALIDATION_COLUMNS = ('namespace', 'name', 'path', 'phase', 'id')


def invalidation_row(invalidation: Invalidation) -> Dict[str, Any]:
    """Flatten an Invalidation for output"""
    return {
        'namespace': invalidation.namespace,
        'name': invalidation.name,
        'path': invalidation.spec.path,
        'phase': invalidation.status.phase,
        'id': invalidation.status.id,
        'message': invalidation.status.message,
    }


class OutputFormatter:
    """Format output as a table, json or yaml"""

    def __init__(self, format: str = 'table'):
        self.format = format

    def _dump(self, data: Any):
        if self.format == 'json':
            click.echo(json.dumps(data, indent=2, default=str))
        else:
            click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), nl=False)

    def output(self, data: Dict[str, Any], title: Optional[str] = None):
        """Output a mapping (settings, one invalidation, an error)"""
        if self.format != 'table':
            self._dump(data)
            return

        if title:
            click.echo(f"\n{title}")
            click.echo("=" * len(title))

        width = max((len(str(k)) for k in data), default=0)
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                value = ', '.join(str(v) for v in value)
            click.echo(f"{str(key).ljust(width)}: {'-' if value in (None, '') else value}")

    def output_invalidations(self, invalidations: Iterable[Invalidation]):
        """Output invalidations, one row each"""
        rows = [invalidation_row(i) for i in invalidations]
        if self.format != 'table':
            self._dump(rows)
            return

        if not rows:
            click.echo("No invalidations found")
            return

        cells = [[str(row[col] or '-') for col in INVALIDATION_COLUMNS] for row in rows]
        widths = [max(len(col), *(len(c[i]) for c in cells)) for i, col in enumerate(INVALIDATION_COLUMNS)]

        click.echo("  ".join(col.upper().ljust(w) for col, w in zip(INVALIDATION_COLUMNS, widths)))
        for row in cells:
            click.echo("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))
