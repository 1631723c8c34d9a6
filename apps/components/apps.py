from django.apps import AppConfig


class ComponentsConfig(AppConfig):
    name = 'apps.components'
    verbose_name = 'Components'
