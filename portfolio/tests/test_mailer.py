import unittest
from unittest.mock import MagicMock, patch

import requests

from portfolio.mailer import MailerError, ResendMailer


class ResendMailerTests(unittest.TestCase):
    def setUp(self):
        self.mailer = ResendMailer(api_key="re_test", sender="site@example.com")

    def test_returns_provider_id(self):
        response = MagicMock(status_code=200)
        response.json.return_value = {"id": "email-1"}
        with patch.object(self.mailer._session, "post", return_value=response) as post:
            self.assertEqual(self.mailer.send("ada@example.com", "Hi", "<p>Hi</p>"), "email-1")
        self.assertEqual(post.call_args.kwargs["json"]["to"], ["ada@example.com"])

    def test_accepted_without_json_body(self):
        response = MagicMock(status_code=200, text="OK")
        response.json.side_effect = ValueError("no json")
        with patch.object(self.mailer._session, "post", return_value=response):
            self.assertEqual(self.mailer.send("ada@example.com", "Hi", "<p>Hi</p>"), "")

    def test_provider_error(self):
        response = MagicMock(status_code=429, text="slow down")
        response.json.return_value = {"message": "rate limited"}
        with patch.object(self.mailer._session, "post", return_value=response):
            with self.assertRaisesRegex(MailerError, "429: rate limited"):
                self.mailer.send("ada@example.com", "Hi", "<p>Hi</p>")

    def test_unreachable(self):
        with patch.object(
            self.mailer._session, "post", side_effect=requests.ConnectionError("refused")
        ):
            with self.assertRaises(MailerError):
                self.mailer.send("ada@example.com", "Hi", "<p>Hi</p>")


if __name__ == "__main__":
    unittest.main()
