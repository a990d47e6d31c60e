import httpx
import pytest
from fastapi import status


@pytest.mark.asyncio
async def test_read_root(client: httpx.AsyncClient):
    response = await client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Sales Admin API is running!"}


@pytest.mark.asyncio
async def test_domain_errors_are_mapped_to_detail_bodies(client: httpx.AsyncClient):
    response = await client.get("/api/v1/inventory/products/no-such-product")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Product not found"}
