# Importing every model module registers its tables on AbstractSQLModel.metadata
from app.api.users.models import *
from app.api.events.models import *
from app.api.teams.models import *
from app.api.help_requests.models import *
