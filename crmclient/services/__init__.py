from .auth import AuthAPI
from .resources import ResourceAPI, ClientAPI, InvoiceAPI
