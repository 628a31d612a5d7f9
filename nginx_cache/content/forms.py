from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.validators import DataRequired, Length, Optional, Regexp

from ..models import POST_STATUSES

class PostForm(FlaskForm):
    title = StringField("Title", validators=[DataRequired(), Length(max=255)])
    slug = StringField(
        "Slug",
        validators=[Optional(), Length(max=255), Regexp(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", message="Lowercase letters, digits and dashes only.")],
    )
    body = TextAreaField("Body", validators=[Optional()])
    status = SelectField("Status", choices=[(s, s) for s in POST_STATUSES], validators=[DataRequired()])

    submit = SubmitField("Save")

class DeleteForm(FlaskForm):
    submit = SubmitField("Delete permanently")
