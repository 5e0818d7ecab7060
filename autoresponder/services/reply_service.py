from twilio.twiml.messaging_response import MessagingResponse

ACCOUNT_NOT_FOUND_RESPONSE = "Sorry, this number is not linked to any account."
GENERIC_ERROR_RESPONSE = "Sorry, something went wrong. Please try again later."

REPLY_MEDIA_TYPE = "application/xml"


def build_reply_envelope(text: str) -> str:
    """Wrap a reply in the provider's TwiML ``<Response><Message>`` document."""
    response = MessagingResponse()
    response.message(text or GENERIC_ERROR_RESPONSE)
    return str(response)
