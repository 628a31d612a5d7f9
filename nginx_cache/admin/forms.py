import os

from flask_wtf import FlaskForm
from wtforms import StringField, BooleanField, SubmitField
from wtforms.validators import Length, Optional, ValidationError


def _absolute_path(form, field):
    value = (field.data or "").strip()
    if value and not os.path.isabs(value):
        raise ValidationError('"Cache Zone Path" must be an absolute path.')


class CacheSettingsForm(FlaskForm):
    cache_path = StringField(
        "Cache Zone Path",
        validators=[Optional(), Length(max=255), _absolute_path],
        description="The absolute path to the location of the cache zone, specified in the Nginx "
                    "fastcgi_cache_path, proxy_cache_path or uwsgi_cache_path directive.",
    )
    auto_purge = BooleanField("Automatically flush the cache when content changes")
    submit = SubmitField("Save Changes")
