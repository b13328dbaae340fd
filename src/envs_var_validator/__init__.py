"""
envs-var-validator Task Collection
"""

from invoke import Collection

from .build.tasks import DEFAULT_SETTINGS, envs, install

# Create namespace and collect tasks from each submodule
namespace = Collection()

for submodule in [install, envs]:
    submodule_collection = Collection.from_module(submodule)
    for task_name, task in submodule_collection.tasks.items():
        namespace.add_task(task)

namespace.configure({'envs': dict(DEFAULT_SETTINGS)})

__version__ = '0.1.0'
