from Form.Form import Form, Submitter, encode

__all__ = ["Form", "Submitter", "encode"]
