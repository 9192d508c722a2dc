"""Forms for the teams blueprint."""

from wtforms import StringField
from wtforms.validators import DataRequired, Length

from muluparty.core.forms import APIForm, Identifier, IdListField


class CreateTeamForm(APIForm):
    """Form to create a team with its first participants."""

    name = StringField("Team Name", validators=[DataRequired(), Length(max=100)])
    participants = IdListField(
        "Participants", validators=[DataRequired(), Identifier("User identifier")]
    )


class JoinTeamForm(APIForm):
    """Form for a user joining a team by its join code."""

    join_code = StringField("Join Code", validators=[DataRequired()])
    user_id = StringField(
        "User", validators=[DataRequired(), Identifier("User identifier")]
    )


class JoinTeamsForm(APIForm):
    """Form for adding one user to several teams at once."""

    team_ids = IdListField(
        "Teams", validators=[DataRequired(), Identifier("Team identifier")]
    )
