import json
import logging
import sys
import unittest

from financas.core.logging import JsonFormatter


class TestJsonFormatter(unittest.TestCase):

    def make_record(self, msg, *args):
        return logging.LogRecord("financas.core.db", logging.ERROR, __file__, 10, msg, args, None)

    def test_message_with_quotes_and_newline_is_valid_json(self):
        record = self.make_record("Erro ao adicionar custo fixo '%s': %s", 'Aluguel "casa"', "linha 1\nlinha 2")
        payload = json.loads(JsonFormatter().format(record))

        self.assertEqual(payload["level"], "ERROR")
        self.assertEqual(payload["name"], "financas.core.db")
        self.assertEqual(payload["msg"], "Erro ao adicionar custo fixo 'Aluguel \"casa\"': linha 1\nlinha 2")

    def test_exception_is_included(self):
        try:
            raise ValueError("falhou")
        except ValueError:
            record = logging.LogRecord("financas", logging.ERROR, __file__, 10, "boom", (), sys.exc_info())
        payload = json.loads(JsonFormatter().format(record))
        self.assertIn("ValueError: falhou", payload["exc"])


if __name__ == '__main__':
    unittest.main()
