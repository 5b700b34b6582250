#!/usr/bin/env python3
"""
Examples of using the screen flow generator.

Run this file to print example diagrams and save them as PNG files.
"""

from screenflow import ScreenFlowGenerator, parse_screens, validate_graph


def example_login():
    """Login with a conditional lockout and a help page"""
    print("Example 1: Login Flow")

    input_text = """
    [Login]
    // S: credentials sent over TLS only
    T Welcome back
    E Email
    E Password
    B Forgot password
    --
    A Sign in => Home
    ={3 failed attempts}=> Lockout
    => Help

    [Home]
    T Dashboard
    A Log out => Login

    [Lockout]
    T Try again in 15 minutes

    [Help]
    T FAQ
    """

    generator = ScreenFlowGenerator()
    print(generator.generate(input_text))
    generator.save_png(input_text, "example_login.png", scale=2)
    print("  Saved: example_login.png\n")


def example_signup():
    """Multi-step signup with a retry loop"""
    print("Example 2: Signup Wizard")

    input_text = """
    [Account]
    E Email
    E Password
    A Continue => Profile

    [Profile]
    E Display name
    O Avatar picker
    A Back => Account
    A Continue => Verify

    [Verify]
    // U: code field auto-focuses
    E Code
    ={code expired}=> Verify
    A Finish => Welcome

    [Welcome]
    T All set
    """

    generator = ScreenFlowGenerator()
    print(generator.generate(input_text))
    generator.save_png(input_text, "example_signup.png", scale=2)
    print("  Saved: example_signup.png\n")


def example_validation():
    """Spotting typos in a draft"""
    print("Example 3: Validating a Draft")

    input_text = """
    [Start]
    A Go => Setings
    [Settings]
    [Settings]
    """

    graph = parse_screens(input_text)
    for message in validate_graph(graph).messages(graph):
        print(f"  {message}")
    print()


if __name__ == "__main__":
    example_login()
    example_signup()
    example_validation()
