from app.models.audit_event import AuditEvent
from app.models.cycle_participant import CycleParticipant
from app.models.development_suggestion import DevelopmentSuggestion
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_form import EvaluationForm
from app.models.evaluation_response import EvaluationResponse
from app.models.form_question import FormQuestion
from app.models.user import User

__all__ = [ "AuditEvent", "CycleParticipant", "DevelopmentSuggestion",
           "EvaluationCycle", "EvaluationForm", "EvaluationResponse",
           "FormQuestion", "User" ]
