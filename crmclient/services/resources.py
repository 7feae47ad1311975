from typing import Any

from crmclient.http import Http


class ResourceAPI:
    """CRUD calls for one collection on the CRM backend, e.g. /clients."""

    resource = ""

    def __init__(self, http: Http, resource: str = None):
        self.http = http
        if resource is not None:
            self.resource = resource

    def _path(self, resource_id: Any = None) -> str:
        if resource_id is None:
            return f"/{self.resource}"
        return f"/{self.resource}/{resource_id}"

    async def get_all(self):
        response = await self.http.get(self._path())
        return response["data"]

    async def get_by_id(self, resource_id):
        response = await self.http.get(self._path(resource_id))
        return response["data"]

    async def create(self, data):
        response = await self.http.post(self._path(), data)
        return response["data"]

    async def update(self, resource_id, data):
        response = await self.http.put(self._path(resource_id), data)
        return response["data"]

    async def delete(self, resource_id):
        response = await self.http.delete(self._path(resource_id))
        return response["data"]


class ClientAPI(ResourceAPI):
    resource = "clients"


class InvoiceAPI(ResourceAPI):
    resource = "invoices"
