from django.apps import AppConfig


class ServiceRecordsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'service_records'
    verbose_name = 'Service Records'
