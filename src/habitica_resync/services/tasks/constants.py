"""Constants for the Habitica tasks service."""

HABITICA_API_URL = 'https://habitica.com/api'
DEFAULT_API_VERSION = 3

# Identifies this integration to Habitica in the x-client header
HABITICA_SIDE_PLUGIN_ID = 'habitica-x-obsidian-task-integration'
DEVELOPER_USER_ID = 'a8e40d27-c872-493f-acf2-9fe75c56ac0c'

# Rate limiting
DEFAULT_REMAINING_REQUESTS = 30
RATE_LIMIT_REMAINING_HEADER = 'x-ratelimit-remaining'
RATE_LIMIT_RESET_HEADER = 'x-ratelimit-reset'

# Rendering
CHECKBOX_DONE = '- [x]'
CHECKBOX_OPEN = '- [ ]'
DUE_DATE_GLYPH = '📅'
PRIORITY_GLYPHS = ('⏬', '🔽', '🔼', '⏫')
NOTE_SEPARATOR = '\n\n---\n\n'
NOTE_EXTENSION = '.md'
