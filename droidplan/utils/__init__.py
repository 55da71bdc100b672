from .google_services import get_registered_identities, load_registered_identities
