"""
Text rendering for Wumpus World.

Jinja2-based templates for the board grid and status panel. Rendering is
read-only: it takes a GameState and never changes it.
"""

from pathlib import Path
from typing import Dict, Any, Optional, List
from jinja2 import Environment, FileSystemLoader, DictLoader, TemplateNotFound

from engine import GameState, GRID_SIZE, START, available_actions

# Glyphs drawn in each cell
PLAYER_GLYPH = '@'
GOLD_GLYPH = '$'
EMPTY_GLYPH = '.'
CELL_WIDTH = 2


class BoardRenderer:
    """
    Jinja2-based board renderer.

    Uses the inline templates below unless a template directory is given.
    """

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir

        if self.template_dir is not None and self.template_dir.exists():
            self.env = Environment(
                loader=FileSystemLoader(str(self.template_dir)),
                trim_blocks=True,
                lstrip_blocks=True,
            )
        else:
            self.env = Environment(
                loader=DictLoader(DEFAULT_TEMPLATES),
                trim_blocks=True,
                lstrip_blocks=True,
            )

        # Register custom filters
        self.env.filters['cell'] = self._format_cell
        self.env.filters['listing'] = self._format_listing

    def _format_cell(self, glyphs: str) -> str:
        """Pad a cell so every column has the same width."""
        return (glyphs or EMPTY_GLYPH).ljust(CELL_WIDTH)

    def _format_listing(self, values, empty: str = 'none') -> str:
        values = list(values)
        return ', '.join(str(v) for v in values) if values else empty

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound:
            if template_name not in DEFAULT_TEMPLATES:
                raise
            # A custom template directory may only override some templates
            template = self.env.from_string(DEFAULT_TEMPLATES[template_name])
        return template.render(**context).lstrip("\n")

    def board_rows(self, state: GameState) -> List[List[str]]:
        """Glyphs for each cell, top row first."""
        rows = []
        for y in range(GRID_SIZE):
            row = []
            for x in range(GRID_SIZE):
                glyphs = ''
                if state.player == (x, y):
                    glyphs += PLAYER_GLYPH
                # Held gold is shown at home, not where it was found
                if state.has_gold and (x, y) == START:
                    glyphs += GOLD_GLYPH
                row.append(glyphs)
            rows.append(row)
        return rows

    def render_board(self, state: GameState) -> str:
        return self.render('board.txt', {'rows': self.board_rows(state)})

    def render_status(self, state: GameState) -> str:
        context = {
            'status': state.status.value,
            'message': state.message,
            'percepts': [p.value for p in state.percepts],
            'actions': available_actions(state),
            'has_gold': state.has_gold,
            'arrow_used': state.arrow_used,
        }
        return self.render('status.txt', context)

    def render_screen(self, state: GameState) -> str:
        """Board followed by the status panel."""
        return self.render_board(state) + '\n' + self.render_status(state)


# =============================================================================
# INLINE TEMPLATES
# =============================================================================

DEFAULT_TEMPLATES = {
    'board.txt': '''
{% for row in rows %}
{{ row | map('cell') | join(' ') }}
{% endfor %}
''',

    'status.txt': '''
Status: {{ status }}
{% if message %}
{{ message }}
{% endif %}
Percepts: {{ percepts | listing }}
Gold: {{ 'held' if has_gold else 'not found' }}  Arrow: {{ 'used' if arrow_used else 'ready' }}
Actions: {{ actions | listing }}
''',
}


# Global renderer instance
_renderer: Optional[BoardRenderer] = None


def get_renderer() -> BoardRenderer:
    """Get or create the global renderer."""
    global _renderer
    if _renderer is None:
        _renderer = BoardRenderer()
    return _renderer


def render_template(template_name: str, context: Dict[str, Any]) -> str:
    """Convenience function to render a template."""
    return get_renderer().render(template_name, context)
