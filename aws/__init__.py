#!/usr/bin/env python3
"""
CloudFormation stack deploy and teardown package.
"""
from .deploy import deploy_stack
from .destroy import teardown
from .outputs import OutputsStore, MemoryOutputsStore

__all__ = ['deploy_stack', 'teardown', 'OutputsStore', 'MemoryOutputsStore']
