class GlobalMessages:
    # Contact Messages
    CONTACT_RECEIVED = "Message received! I'll get back to you soon."
    CONTACT_VALIDATION_FAILED = "Validation failed"
    CONTACT_RATE_LIMITED = "Too many contact form submissions, please try again later."
    CONTACT_SEND_FAILED = "Failed to send message. Please try again later."

    # Contact field messages
    NAME_INVALID = "Name must be between 2 and 50 characters"
    EMAIL_INVALID = "Please provide a valid email address"
    SUBJECT_INVALID = "Subject must be between 2 and 100 characters"
    MESSAGE_INVALID = "Message must be between 5 and 1000 characters"

    # General Messages
    API_RUNNING = "Portfolio API is running"
    API_RATE_LIMITED = "Too many requests from this IP, please try again later."
    API_ROUTE_NOT_FOUND = "API route not found"
    INTERNAL_ERROR = "Something went wrong!"
