"""
Shared UI component tags.

Usage in templates:
    {% load component_tags %}
    {% preloader %}
"""

from django import template

register = template.Library()

PRELOADER_ID = 'preloader'


@register.inclusion_tag('components/preloader.html')
def preloader():
    """
    Render the busy indicator.

    It takes no arguments and holds no state. The base layout points
    hx-indicator at it, so it shows during any HTMX request.
    """
    return {'preloader_id': PRELOADER_ID}
