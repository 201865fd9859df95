"""next-scaffold: scaffolds a Next.js 15 app with tRPC, NextAuth, Prisma and MUI."""

__version__ = "0.1.0"
