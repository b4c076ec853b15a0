from django.apps import AppConfig


class RefdataConfig(AppConfig):
    name = 'refdata'
    verbose_name = 'Hospital reference data'
