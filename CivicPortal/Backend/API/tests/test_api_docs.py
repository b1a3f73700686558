"""Every Swagger YAML referenced by a route exists and parses."""

import importlib
import os
import re

import pytest
import yaml

API_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SWAG_CALL = re.compile(r"get_swag_from\(yaml_folder, '([^']+)'\)")


def _route_docs():
    blueprints_dir = os.path.join(API_ROOT, 'blueprints')
    for folder, _, files in os.walk(blueprints_dir):
        for name in sorted(files):
            if not name.endswith('.py'):
                continue
            path = os.path.join(folder, name)
            with open(path, encoding='utf-8') as f:
                filenames = SWAG_CALL.findall(f.read())
            if not filenames:
                continue
            module_name = os.path.relpath(path, API_ROOT)[:-3].replace(os.sep, '.')
            for filename in filenames:
                yield module_name, filename


@pytest.mark.parametrize('module_name,filename', list(_route_docs()))
def test_route_doc_exists(module_name, filename):
    module = importlib.import_module(module_name)
    yaml_path = os.path.join(module.yaml_folder, filename)

    assert os.path.isfile(yaml_path), f'{module_name} references missing {yaml_path}'
    with open(yaml_path, encoding='utf-8') as f:
        doc = yaml.safe_load(f)
    assert doc['summary']
    assert doc['responses']
