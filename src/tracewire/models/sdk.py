"""
SDK identity carried in every envelope header.
"""

from pydantic import BaseModel


class SdkPackage(BaseModel):
    name: str
    version: str


class SdkVersion(BaseModel):
    name: str
    version: str
    packages: list[SdkPackage] = []

    def add_package(self, name: str, version: str) -> None:
        """Record a package once; a repeated name/version pair is ignored."""
        for pkg in self.packages:
            if pkg.name == name and pkg.version == version:
                return
        self.packages.append(SdkPackage(name=name, version=version))
