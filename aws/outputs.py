#!/usr/bin/env python3
"""
Local cache of CloudFormation stack outputs (outputs.json).

The file holds the Outputs list exactly as DescribeStacks returns it:
[{"OutputKey": "...", "OutputValue": "..."}, ...]
Readers get a flat {OutputKey: OutputValue} dict.
"""
import json
import os


OUTPUTS_FILE = 'outputs.json'


def outputs_to_dict(outputs):
    """Flatten a list of {OutputKey, OutputValue} entries into a dict."""
    result = {}
    for output in outputs or []:
        result[output['OutputKey']] = output['OutputValue']
    return result


class OutputsStore:
    """Outputs record backed by a JSON file."""

    def __init__(self, path=None):
        self.path = path or os.path.join(os.getcwd(), OUTPUTS_FILE)

    def exists(self):
        return os.path.exists(self.path)

    def read(self):
        """Return the outputs as a dict; missing or unreadable files read as {}."""
        try:
            with open(self.path, 'r') as f:
                return outputs_to_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError):
            return {}

    def write(self, outputs):
        """Overwrite the file with the raw outputs list. Errors propagate."""
        with open(self.path, 'w') as f:
            json.dump(outputs, f, indent=2)
            f.write('\n')

    def delete(self):
        """Remove the file. Returns True if a file was removed."""
        if not os.path.exists(self.path):
            return False
        os.unlink(self.path)
        return True


class MemoryOutputsStore:
    """In-memory outputs record with the same interface as OutputsStore."""

    path = '<memory>'

    def __init__(self, outputs=None):
        self.outputs = outputs

    def exists(self):
        return self.outputs is not None

    def read(self):
        return outputs_to_dict(self.outputs)

    def write(self, outputs):
        self.outputs = [dict(o) for o in outputs]

    def delete(self):
        existed = self.outputs is not None
        self.outputs = None
        return existed
