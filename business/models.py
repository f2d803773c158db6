from django.db import models


class BusinessSetting(models.Model):
    """
    Admin-editable key/value row. Values are stored as text and typed by
    business.config.BusinessConfig when loaded.
    """
    key = models.CharField(max_length=64, unique=True)
    value = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("key",)

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
