from stackrunner import BootstrapInstance, CloudStackProvider


def main():
    # Example usage of the CloudStack provider
    provider = CloudStackProvider.from_config_file("cloudstack.toml", controller_id="controller-1")

    bootstrap = BootstrapInstance.model_validate({
        "name": "runner-1",
        "pool_id": "pool-1",
        "os_type": "linux",
        "arch": "amd64",
        "tools": [
            {
                "os": "linux",
                "architecture": "x64",
                "download_url": "https://example.com/actions-runner-linux-x64.tar.gz",
                "filename": "actions-runner-linux-x64.tar.gz",
            }
        ],
        "extra_specs": {"extra_packages": ["jq"]},
    })

    instance = provider.create_instance(bootstrap)
    print(f"Created: {instance}")
    print(f"Pool instances: {provider.list_instances('pool-1')}")


if __name__ == "__main__":
    main()
