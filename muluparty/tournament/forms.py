"""Forms for the tournament blueprint."""

from wtforms import DateField, StringField
from wtforms.validators import DataRequired, Length, ValidationError

from muluparty.core.forms import APIForm, IdListField


class CreateTournamentForm(APIForm):
    """Form to create a tournament with its initial teams."""

    name = StringField("Tournament Name", validators=[DataRequired(), Length(max=100)])
    start_date = DateField("Start Date", validators=[DataRequired()])
    end_date = DateField("End Date", validators=[DataRequired()])
    team_ids = IdListField("Teams", validators=[DataRequired()])

    def validate_end_date(self, field):
        """Ensure the tournament does not end before it starts."""
        if self.start_date.data and field.data and field.data < self.start_date.data:
            raise ValidationError("End date must not be before the start date.")


class AddTeamsForm(APIForm):
    """Form to add teams to an existing tournament."""

    team_ids = IdListField("Teams", validators=[DataRequired()])
