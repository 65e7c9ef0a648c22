from pydantic import EmailStr, Field as PydanticField

from src.api.models.baseModel import ApiSchema


SUBJECT_LABELS = {
    "general": "General question",
    "order": "Order",
    "product": "Product",
    "return": "Returns and exchanges",
    "payment": "Payment",
    "technical": "Technical support",
    "feedback": "Feedback",
    "other": "Other",
}


class ContactForm(ApiSchema):
    name: str = PydanticField(min_length=1, max_length=191)
    email: EmailStr
    phone: str = PydanticField(min_length=8, max_length=20)
    subject: str = PydanticField(min_length=1, max_length=50)
    message: str = PydanticField(min_length=1, max_length=5000)

    @property
    def subject_label(self) -> str:
        return SUBJECT_LABELS.get(self.subject, SUBJECT_LABELS["other"])
