"""Forms for the user blueprint."""

from wtforms import StringField
from wtforms.validators import Length, Optional

from muluparty.core.forms import APIForm, Identifier


class CreateUserForm(APIForm):
    """Form to register a user, optionally under an existing auth id."""

    user_id = StringField(
        "User ID",
        validators=[Optional(), Length(max=128), Identifier("User identifier")],
    )
