"""Tests for the health and root endpoints."""

import unittest
from unittest.mock import patch, MagicMock
from fastapi.testclient import TestClient

from api.main import app, SERVICE_NAME


class TestHealth(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    @patch('api.routes.health.get_mongodb_client')
    def test_healthy(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["services"]["mongodb"]["status"], "healthy")

    @patch('api.routes.health.get_mongodb_client')
    def test_degraded_without_database(self, mock_get_client):
        mock_get_client.return_value = None

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "degraded")

    def test_root(self):
        response = self.client.get("/")

        self.assertEqual(response.json()["service"], SERVICE_NAME)
        self.assertEqual(response.json()["status"], "running")


if __name__ == '__main__':
    unittest.main()
